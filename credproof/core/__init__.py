"""
credproof core: claim model, canonical encoding and the proof codec.
"""
