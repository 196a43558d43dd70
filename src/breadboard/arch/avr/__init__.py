# src/breadboard/arch/avr/__init__.py
"""
AVR Architecture Package
"""
from .cpu import AvrCpu
from .state import AvrCpuState
