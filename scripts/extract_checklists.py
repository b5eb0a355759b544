#!/usr/bin/env python3
"""
Точка входа: извлечение номеров checklist из изображений.

Использование:
    # Обработать все изображения из data/input/
    python scripts/extract_checklists.py

    # Обработать конкретное изображение или папку
    python scripts/extract_checklists.py path/to/image.jpg
    python scripts/extract_checklists.py path/to/folder --mode grouped

    # Подробные логи
    python scripts/extract_checklists.py --log-level DEBUG

Изображения режутся на batch по MAX_IMAGES_PER_BATCH. Для каждого batch
сохраняется <session_id>.json, в конце - общий экспорт
checklist-extraction-results-YYYY-MM-DD.json.
"""

import sys
import argparse
from pathlib import Path

from loguru import logger

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import validate_config, INPUT_DIR, OUTPUT_DIR, MAX_IMAGES_PER_BATCH, BATCH_MODE
from checklist_ocr.extraction import ExtractionComponentFactory
from checklist_ocr.extraction.domain.exceptions import BatchValidationError, ExtractionError
from checklist_ocr.review import build_export, review_queue


def collect_images(path: Path, file_manager) -> list[Path]:
    """Один файл или все изображения папки."""
    if path.is_file():
        return [path]
    return file_manager.get_image_files(path)


def main():
    """Главная функция запуска извлечения."""

    parser = argparse.ArgumentParser(description="Checklist OCR: извлечение номеров checklist")
    parser.add_argument("path", nargs="?", help="Путь к изображению или папке (по умолчанию data/input)")
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR, help="Директория для JSON результатов")
    parser.add_argument("--mode", choices=["sequential", "grouped"], default=BATCH_MODE, help="Режим batch")
    parser.add_argument("--log-level", default="INFO", help="Уровень логов loguru (DEBUG, INFO, ...)")
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    print("\n" + "="*60)
    print("  CHECKLIST OCR - Извлечение номеров checklist")
    print("="*60)

    # Проверяем конфигурацию
    try:
        validate_config()
        print("\n[OK] Конфигурация проверена")
    except ValueError as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)

    info = ExtractionComponentFactory.get_extraction_info()
    print(f"[OK] Лестница попыток: {' -> '.join(info['ladder'])}")

    source = Path(args.path) if args.path else INPUT_DIR
    if not source.exists():
        print(f"[ERROR] Путь не найден: {source}")
        sys.exit(1)

    file_manager = ExtractionComponentFactory.create_file_manager()
    image_paths = collect_images(source, file_manager)
    if not image_paths:
        print(f"[WARNING] В {source} не найдены изображения")
        sys.exit(0)

    print(f"[OK] Изображений: {len(image_paths)} ({source})")
    print(f"[OK] Output директория: {args.output}")

    try:
        processor = ExtractionComponentFactory.create_batch_processor(mode=args.mode)
    except ExtractionError as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)

    all_results = []
    chunks = [image_paths[i:i + MAX_IMAGES_PER_BATCH] for i in range(0, len(image_paths), MAX_IMAGES_PER_BATCH)]

    for i, chunk in enumerate(chunks, 1):
        print(f"\n[BATCH {i}/{len(chunks)}] {', '.join(p.name for p in chunk)}")
        try:
            images = [(p.name, file_manager.read_image(p)) for p in chunk]
        except ExtractionError as e:
            print(f"[ERROR] {e}")
            sys.exit(1)

        try:
            response = processor.process_batch(images)
        except BatchValidationError as e:
            print(f"[ERROR] {e.error}: {e.user_message}")
            sys.exit(1)

        saved = file_manager.save_batch_response(response, args.output)
        print(f"  [SAVED] {saved}")

        for result in response.results:
            if result.success:
                print(f"  [OK]    {result.file_name}: {result.checklist_number} "
                      f"({result.processing_config}, confidence {result.confidence})")
            else:
                print(f"  [FAIL]  {result.file_name}: {result.error}")

        all_results.extend(response.results)

    export_path = file_manager.save_export(build_export(all_results), args.output)

    # Итоги
    success_count = sum(1 for r in all_results if r.success)
    pending_review = review_queue(all_results)

    print("\n" + "="*60)
    print(f"  ИТОГИ: {success_count}/{len(all_results)} номеров извлечено")
    print(f"  Экспорт: {export_path}")
    if pending_review:
        print(f"  [REVIEW] Требуют проверки: {', '.join(r.file_name for r in pending_review)}")
    print("="*60)


if __name__ == "__main__":
    main()
