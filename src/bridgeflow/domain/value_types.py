from __future__ import annotations
from typing import NewType, Literal

Address = NewType("Address", str)   # 0x-prefixed hex
Topic0  = NewType("Topic0", str)    # 66-char 0x-hash
Network = NewType("Network", str)   # chain key, e.g. "ethereum", "eni"
Status  = Literal["done", "failed"]
Direction = Literal["inflow", "outflow"]
