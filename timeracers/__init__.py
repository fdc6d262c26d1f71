"""Time Racers - dodge the campus crowd before the clock runs out.

The simulation core (entities, movement, animation, collisions, spawning
and the countdown) is pure Python and can be driven without a display.
The pygame front end lives in ``timeracers.game_mode`` and
``timeracers.main``.
"""

__version__ = "1.0.0"
