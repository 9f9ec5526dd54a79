"""
Overplanned taste jobs -- caller-side orchestration over the pure engine.

Modules
-------
signal_health       Decay a user's signals, summarise, detect trajectory
reprofiling_check   Derive trigger input from raw user state and evaluate it
"""
