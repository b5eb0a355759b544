"""Конфигурация проекта Checklist OCR."""
