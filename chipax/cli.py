"""Command line front-end: run a ROM in a pygame window or headless."""

import argparse
import sys

import numpy as np

from chipax.constants import PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT
from chipax.emulator import run_frames
from chipax.errors import LoadError, MachineFault
from chipax.interpreter import Interpreter
from chipax.logging import ConsoleLogger, LEVELS
from chipax.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text, save_screenshot
from chipax.state import is_fatal

FPS = 60


def build_key_map(pygame):
    """Map keyboard keys to the hex keypad (COSMAC VIP layout on the left hand)."""
    return {
        pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
        pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
        pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
        pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
    }


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="chipax", description="CHIP-8 interpreter")
    parser.add_argument("rom", help="path to a CHIP-8 program image")
    parser.add_argument("--scale", type=int, default=10, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--ipf", type=int, default=10, help="instructions per 60 Hz frame")
    parser.add_argument(
        "--program-start", type=lambda value: int(value, 0), default=PROGRAM_START,
        help="load address and initial PC, e.g. 0x600 for ETI 660 programs",
    )
    parser.add_argument("--color-scheme", default="classic", help="display colors")
    parser.add_argument("--log-level", default="INFO", choices=LEVELS, type=str.upper)
    parser.add_argument(
        "--headless", type=int, metavar="FRAMES",
        help="run FRAMES frames without a window and print the screen",
    )
    parser.add_argument("--screenshot", metavar="PATH", help="with --headless, also save the screen as an image")
    return parser.parse_args(argv)


def run_headless(interpreter: Interpreter, args: argparse.Namespace, logger: ConsoleLogger) -> int:
    state = run_frames(interpreter.state, args.headless, args.ipf, progress=True)
    interpreter.state = state
    print(display_to_text(state.display))
    if args.screenshot:
        save_screenshot(state.display, args.screenshot, scale=args.scale, color_scheme=args.color_scheme)
        logger.info(f"Saved screenshot to {args.screenshot}")
    if is_fatal(state.error):
        logger.error(f"Machine halted at 0x{int(state.pc):03X} with error {int(state.error)}")
        return 1
    return 0


def run_window(interpreter: Interpreter, args: argparse.Namespace, logger: ConsoleLogger) -> int:
    """Main emulator loop: timers and ``ipf`` cycles once per 60 Hz frame."""
    import pygame

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * args.scale, SCREEN_HEIGHT * args.scale))
    pygame.display.set_caption("chipax")
    clock = pygame.time.Clock()
    key_map = build_key_map(pygame)
    on_color, off_color = create_color_scheme(args.color_scheme)
    rom_data = interpreter.state.memory

    running = True
    paused = False
    status = 0

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset")

    while running:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_F5:
                    interpreter = Interpreter(program_start=args.program_start, logger=logger)
                    interpreter.state = interpreter.state.replace(memory=rom_data)
                    paused = False
                    logger.info("Reset")
                elif event.key in key_map:
                    interpreter.set_key(key_map[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in key_map:
                    interpreter.set_key(key_map[event.key], False)

        if not paused and not interpreter.halted:
            interpreter.tick_timers()
            try:
                for _ in range(args.ipf):
                    interpreter.step()
            except MachineFault:
                status = 1
                paused = True

        if interpreter.take_redraw_flag() or paused:
            rgb = chip8_display_to_rgb(interpreter.state.display, args.scale, on_color, off_color)
            pygame.surfarray.blit_array(screen, np.transpose(rgb, (1, 0, 2)))
            pygame.display.flip()

        pygame.display.set_caption("chipax [BEEP]" if interpreter.sound_active else "chipax")

    pygame.quit()
    return status


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = ConsoleLogger(name="chipax", log_level=args.log_level)

    interpreter = Interpreter(program_start=args.program_start, logger=logger)
    try:
        with open(args.rom, "rb") as f:
            interpreter.load(f.read())
    except (OSError, LoadError) as e:
        print(f"chipax: {e}", file=sys.stderr)
        return 1

    if args.headless is not None:
        return run_headless(interpreter, args, logger)
    return run_window(interpreter, args, logger)


if __name__ == "__main__":
    sys.exit(main())
