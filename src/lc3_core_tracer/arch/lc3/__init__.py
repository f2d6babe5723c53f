# src/lc3_core_tracer/arch/lc3/__init__.py
"""
LC-3 Architecture Package
"""
from .cpu import Lc3Cpu
from .state import Lc3CpuState
