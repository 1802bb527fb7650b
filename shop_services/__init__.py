"""
shop_services -- stateful orchestration over the reporting module.

Responsibility:
    Keeps a published dashboard in step with the store by recomputing it
    from a fresh snapshot whenever a change signal arrives.  This is the
    only layer that runs threads.
"""

from shop_services.recompute import ChangeSignal, RecomputeLoop

__all__ = ["ChangeSignal", "RecomputeLoop"]
