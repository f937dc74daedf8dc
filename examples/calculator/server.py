"""
Serve CalculatorImpl on http://127.0.0.1:8000/rpc.
To run: python server.py  (or: callwire serve calculator:CalculatorImpl)
"""
import sys
from pathlib import Path

# example lives in examples/calculator
sys.path.insert(0, str(Path(__file__).resolve().parent))

from callwire import Application, RpcModule, ServerConfig

from calculator import CalculatorImpl

app = Application(config=ServerConfig.from_env())
app.register(RpcModule().server(path="/rpc", handler=CalculatorImpl))

if __name__ == "__main__":
    app.run()
