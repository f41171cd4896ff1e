"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2) y los builders de filtros.
- El dominio no conoce HTTP, CLI, ni httpx: solo conceptos del recurso Jobs.
"""
