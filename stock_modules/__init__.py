"""
Stock Modules -- stateful orchestration over the stock kernel and engines.

Each sub-package owns one business area and may import ``stock_kernel`` and
``stock_engines`` but never the reverse.
"""
