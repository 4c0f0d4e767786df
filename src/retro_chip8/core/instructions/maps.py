# retro_chip8/core/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from retro_chip8.core.snapshot import InstructionKind
from . import alu
from . import control
from . import display
from . import keypad
from . import load

# @intent:map 上位ニブル（命令ファミリー）からデコード関数へのマッピングテーブル。
# 0x0, 0x8, 0xE, 0xF は下位のサブマップで再度ディスパッチする。
FAMILY_DECODE_MAP = {
    0x1: control.decode_jp,
    0x2: control.decode_call,
    0x3: control.decode_se_imm,
    0x4: control.decode_sne_imm,
    0x5: control.decode_se_reg,
    0x6: alu.decode_ld_imm,
    0x7: alu.decode_add_imm,
    0x9: control.decode_sne_reg,
    0xA: load.decode_ld_i,
    0xB: control.decode_jp_v0,
    0xC: alu.decode_rnd,
    0xD: display.decode_drw,
}

# @intent:map 0x0 ファミリー: 下位12bitでディスパッチ。
SYSTEM_DECODE_MAP = {
    0x0E0: display.decode_cls,
    0x0EE: control.decode_ret,
}

# @intent:map 0x8 ファミリー: 下位ニブルでディスパッチ。
ALU_DECODE_MAP = {
    0x0: alu.decode_ld_reg,
    0x1: alu.decode_or,
    0x2: alu.decode_and,
    0x3: alu.decode_xor,
    0x4: alu.decode_add_reg,
    0x5: alu.decode_sub,
    0x6: alu.decode_shr,
    0x7: alu.decode_subn,
    0xE: alu.decode_shl,
}

# @intent:map 0xE ファミリー: 下位バイトでディスパッチ。
KEY_DECODE_MAP = {
    0x9E: keypad.decode_skp,
    0xA1: keypad.decode_sknp,
}

# @intent:map 0xF ファミリー: 下位バイトでディスパッチ。
MISC_DECODE_MAP = {
    0x07: load.decode_ld_vx_dt,
    0x0A: keypad.decode_ld_vx_k,
    0x15: load.decode_ld_dt_vx,
    0x1E: load.decode_add_i,
    0x29: load.decode_ld_f,
    0x33: load.decode_ld_b,
    0x55: load.decode_ld_mem_vx,
    0x65: load.decode_ld_vx_mem,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    InstructionKind.RET: control.execute_ret,
    InstructionKind.JP: control.execute_jp,
    InstructionKind.CALL: control.execute_call,
    InstructionKind.SE_IMM: control.execute_se_imm,
    InstructionKind.SNE_IMM: control.execute_sne_imm,
    InstructionKind.SE_REG: control.execute_se_reg,
    InstructionKind.SNE_REG: control.execute_sne_reg,
    InstructionKind.JP_V0: control.execute_jp_v0,

    # ALU
    InstructionKind.LD_IMM: alu.execute_ld_imm,
    InstructionKind.ADD_IMM: alu.execute_add_imm,
    InstructionKind.LD_REG: alu.execute_ld_reg,
    InstructionKind.OR: alu.execute_or,
    InstructionKind.AND: alu.execute_and,
    InstructionKind.XOR: alu.execute_xor,
    InstructionKind.ADD_REG: alu.execute_add_reg,
    InstructionKind.SUB: alu.execute_sub,
    InstructionKind.SHR: alu.execute_shr,
    InstructionKind.SUBN: alu.execute_subn,
    InstructionKind.SHL: alu.execute_shl,
    InstructionKind.RND: alu.execute_rnd,

    # Index / Memory / Timer
    InstructionKind.LD_I: load.execute_ld_i,
    InstructionKind.LD_VX_DT: load.execute_ld_vx_dt,
    InstructionKind.LD_DT_VX: load.execute_ld_dt_vx,
    InstructionKind.ADD_I: load.execute_add_i,
    InstructionKind.LD_F: load.execute_ld_f,
    InstructionKind.LD_B: load.execute_ld_b,
    InstructionKind.LD_MEM_VX: load.execute_ld_mem_vx,
    InstructionKind.LD_VX_MEM: load.execute_ld_vx_mem,

    # Display
    InstructionKind.CLS: display.execute_cls,
    InstructionKind.DRW: display.execute_drw,

    # Keypad
    InstructionKind.SKP: keypad.execute_skp,
    InstructionKind.SKNP: keypad.execute_sknp,
    InstructionKind.LD_VX_K: keypad.execute_ld_vx_k,
}
