"""Signaling bridge core: wire codec, call sessions, webhook ingestion and relay.

Data flows platform -> webhook -> session registry -> relay -> browser, and
browser -> relay -> call command client -> platform.
"""
