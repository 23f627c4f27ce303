"""Interfaces/abstracciones del Core.

Contratos estructurales (Protocol) que implementan los adaptadores, para que el
Core dependa de abstracciones y se pueda enchufar cualquier transporte (httpx,
un fake de test, record/replay).
"""
