"""
Call the calculator server as if it were a local object.
Start server.py first.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from callwire import get_processor

from calculator import Calculator

with get_processor(Calculator, "http://127.0.0.1:8000/rpc") as calculator:
    print(calculator.add(1, 2))            # 3
    print(calculator.subtract(5, 3))       # 2
    print(calculator.divide_safely(3, 0))  # None
