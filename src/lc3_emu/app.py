# lc3_emu/app.py
"""
コマンドラインアプリケーションのエントリポイント。
設定とイメージを読み込み、システムを構築してHALTまで実行します。
"""
import argparse
import contextlib
import logging
import sys
from typing import List, Optional

import yaml

from lc3_emu.config.builder import SystemBuilder
from lc3_emu.config.loader import ConfigLoader
from lc3_emu.config.models import SystemConfig
from lc3_emu.core.cpu import AbstractCpu
from lc3_emu.core.errors import CpuFault
from lc3_emu.devices.console import BufferConsole, Console
from lc3_emu.devices.terminal import TerminalConsole
from lc3_emu.loader.loader import ImageLoader

logger = logging.getLogger(__name__)

USAGE = "lc3 [image-file1] ..."

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_USAGE = 2
EXIT_FAULT = 3
EXIT_STEP_LIMIT = 4
EXIT_INTERRUPTED = -2

def _step_limit(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid step limit: {text}")
    return value

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lc3", description="LC-3 virtual machine")
    parser.add_argument("images", nargs="*", help="program images to load, in order")
    parser.add_argument("--config", help="YAML system configuration")
    parser.add_argument("--max-steps", type=_step_limit, help="stop after this many instructions")
    parser.add_argument("--strict-isa", action="store_true",
                        help="update flags on NOT/LD/LDR and link R7 on JSR/JSRR")
    parser.add_argument("--input", help="feed this text as keyboard input instead of the terminal")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--trace", action="store_true", help="log every executed instruction")
    return parser

# @intent:responsibility CPUをHALTまで実行し、終了コードを返します。
def _run(cpu: AbstractCpu, max_steps: Optional[int]) -> int:
    try:
        cpu.run(max_steps)
    except CpuFault as e:
        logger.error("CPU fault: %s", e)
        return EXIT_FAULT
    if not cpu.halted:
        return EXIT_STEP_LIMIT
    return EXIT_OK

# @intent:responsibility アプリケーションのメイン関数。
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.trace else getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = SystemConfig()
    if args.config:
        try:
            config = ConfigLoader().load_from_file(args.config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error("Cannot load configuration %s: %s", args.config, e)
            return EXIT_USAGE
    if args.strict_isa:
        config.strict_isa = True
    max_steps = args.max_steps if args.max_steps is not None else config.max_steps

    images = config.images + args.images
    if not images:
        print(USAGE)
        return EXIT_USAGE

    console: Console
    if args.input is not None:
        try:
            input_data = args.input.encode("latin-1")
        except UnicodeEncodeError:
            parser.error("--input must contain only Latin-1 characters")
        console = BufferConsole(input_data)
    else:
        console = TerminalConsole()

    cpu, bus = SystemBuilder().build_system(config, console)
    cpu.trace = args.trace

    loader = ImageLoader()
    for path in images:
        if not loader.load_image(path, bus):
            print(f"failed to load image: {path}")
            return EXIT_LOAD_FAILED

    # 端末の場合のみ、実行中はカノニカルモードを無効化する
    session = console if isinstance(console, TerminalConsole) else contextlib.nullcontext(console)
    try:
        with session:
            status = _run(cpu, max_steps)
    except KeyboardInterrupt:
        print()
        return EXIT_INTERRUPTED

    if isinstance(console, BufferConsole):
        sys.stdout.flush()
        sys.stdout.buffer.write(console.output)
        sys.stdout.buffer.flush()
    return status

if __name__ == '__main__':
    sys.exit(main())
