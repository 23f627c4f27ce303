"""Modelos y errores del dominio.

Datos puros: el dominio no sabe nada de HTTP, la CLI ni el transporte, solo de
los conceptos del backend de Sudojo (niveles, técnicas, tableros, pistas...).
"""
