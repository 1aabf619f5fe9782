"""Client-side swap and limit order engine for UniswapV4 pools on World Chain."""

__version__ = "0.1.0"
