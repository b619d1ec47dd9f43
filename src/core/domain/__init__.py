"""Tipos del dominio: plataforma, sesión, resultados y errores de extracción.

Sin subprocesos ni E/S; los adaptadores producen y consumen estos modelos.
"""
