# retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数と設定ファイルを読み込み、ロギングを設定してメインウィンドウを起動します。
--disassemble を指定した場合はウィンドウを開かずに逆アセンブル結果を出力します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from retro_chip8.common.errors import Chip8Error
from retro_chip8.config.builder import MachineBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from retro_chip8.loader.loader import RomLoader
from retro_chip8.memory.memory import PROGRAM_START

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", help="CHIP-8 ROM file (raw binary)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-level", help="Override the configured log level (DEBUG, INFO, ...)")
    parser.add_argument("--disassemble", action="store_true", help="Print a disassembly of the ROM and exit")
    return parser


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="[%(levelname)s] %(name)s: %(message)s",
    )


# @intent:responsibility ROMをロードし、逆アセンブル結果を1行ずつ返します。
def disassemble_rom(rom_path: str, config: MachineConfig) -> List[str]:
    machine = MachineBuilder().build_machine(config)
    program = RomLoader().load_file(rom_path, machine)
    listing = machine.cpu.disassemble(machine.memory, PROGRAM_START, len(program))
    return [f"{addr:04X}  {hex_bytes}  {text}" for addr, hex_bytes, text in listing]


# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    except (OSError, Chip8Error) as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 2
    configure_logging(args.log_level or config.log_level)

    if args.disassemble:
        if not args.rom:
            print("--disassemble requires a ROM file", file=sys.stderr)
            return 2
        try:
            for line in disassemble_rom(args.rom, config):
                print(line)
        except Chip8Error as e:
            logger.error("%s", e.message)
            return 1
        return 0

    from PySide6.QtWidgets import QApplication
    from .main_window import MainWindow

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    main_win.show()
    if args.rom:
        main_win.load_rom(args.rom)
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
