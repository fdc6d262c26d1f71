#!/usr/bin/env python3
"""Time Racers - Standalone Entry Point.

Usage:
    time-racers
    time-racers --level hallway
    time-racers --seed 42 --log-level DEBUG
    python -m timeracers --animations my_sheets.yaml
"""

import argparse
import sys

import pygame

from timeracers.config import FULLSCREEN, SCREEN_HEIGHT, SCREEN_WIDTH
from timeracers.errors import ConfigurationError
from timeracers.game_mode import TimeRacersMode
from timeracers.logging import (
    close_all_sinks,
    configure_logging,
    create_sink,
    get_logger,
    register_sink,
)

log = get_logger('main')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{TimeRacersMode.NAME} - {TimeRacersMode.DESCRIPTION}")

    # Display options
    parser.add_argument('--width', type=int, default=SCREEN_WIDTH, help='Screen width')
    parser.add_argument('--height', type=int, default=SCREEN_HEIGHT, help='Screen height')
    parser.add_argument('--fullscreen', action='store_true', default=FULLSCREEN, help='Run fullscreen')

    # Game options
    for arg in TimeRacersMode.ARGUMENTS:
        kwargs = {k: v for k, v in arg.items() if k != 'name'}
        parser.add_argument(arg['name'], **kwargs)
    parser.add_argument('--sound-dir', type=str, default=None,
                        help='Folder of <sound_key>.wav voice lines')

    # Logging
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'OFF'],
                        help='Console log level for all modules')
    return parser


def main(argv=None) -> int:
    """Run Time Racers standalone."""
    args = build_parser().parse_args(argv)
    if args.log_level:
        configure_logging(level=args.log_level)
    register_sink('session', create_sink('session'))

    # Initialize pygame
    pygame.init()
    pygame.font.init()

    # Create display
    if args.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        width, height = screen.get_size()
    else:
        width, height = args.width, args.height
        screen = pygame.display.set_mode((width, height))

    pygame.display.set_caption(TimeRacersMode.NAME)

    # Configuration errors surface here, before the first frame
    try:
        game = TimeRacersMode(
            level=args.level,
            width=width,
            height=height,
            fps=args.fps,
            seed=args.seed,
            animations=args.animations,
            sound_dir=args.sound_dir,
        )
    except ConfigurationError as e:
        log.error("Cannot start: %s", e)
        print(f"\nTime Racers could not start:\n  {e}\n", file=sys.stderr)
        pygame.quit()
        close_all_sinks()
        return 1

    print("\n" + "=" * 50)
    print("TIME RACERS")
    print("=" * 50)
    print("Controls:")
    print("  - Arrow keys / WASD to move")
    print("  - P to pause")
    print("  - R to restart after time runs out")
    print("  - ESC to quit")
    print("=" * 50 + "\n")

    clock = pygame.time.Clock()
    running = True
    try:
        while running:
            elapsed_ms = clock.tick(args.fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                else:
                    game.handle_event(event)

            game.update(elapsed_ms)

            game.render(screen)
            pygame.display.flip()
    finally:
        game.close()
        pygame.quit()
        close_all_sinks()
    return 0


if __name__ == "__main__":
    sys.exit(main())
