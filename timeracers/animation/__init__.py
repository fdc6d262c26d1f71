"""Animation templates, playback, lookup and facing selection."""

from timeracers.animation.frames import AnimationFrame, AnimationTemplate
from timeracers.animation.playback import AnimationPlayer
from timeracers.animation.library import (
    AnimationLibrary,
    build_templates,
    default_animation_library,
    load_animation_library,
)
from timeracers.animation.facing import Facing, select_facing
from timeracers.animation.state_machine import AnimationStateMachine

__all__ = [
    'AnimationFrame',
    'AnimationTemplate',
    'AnimationPlayer',
    'AnimationLibrary',
    'build_templates',
    'default_animation_library',
    'load_animation_library',
    'Facing',
    'select_facing',
    'AnimationStateMachine',
]
