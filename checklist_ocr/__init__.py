"""Checklist OCR: извлечение номера checklist с фотографий документов."""

__version__ = "0.1.0"
