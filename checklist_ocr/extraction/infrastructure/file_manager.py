"""
Менеджер файлов для домена Extraction.

Чтение входных изображений и сохранение JSON (ответы batch, экспорт).
Pre-processor и Retry Controller файловую систему не трогают.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from config.settings import SUPPORTED_IMAGE_FORMATS
from contracts.extraction_result_dto import BatchExtractionResponse, ExportDocument
from ..domain.exceptions import ExtractionFileNotFoundError, ExtractionFileWriteError


EXPORT_FILE_PREFIX = "checklist-extraction-results"


def export_file_name(export_date: Optional[date] = None) -> str:
    """checklist-extraction-results-YYYY-MM-DD.json"""
    export_date = export_date or date.today()
    return f"{EXPORT_FILE_PREFIX}-{export_date.isoformat()}.json"


class ExtractionFileManager:
    """Файловый ввод-вывод домена Extraction."""

    def save_json(self, data: Dict[str, Any], file_path: Path) -> Path:
        """
        Пишет JSON (UTF-8, без ASCII-экранирования), создавая родительские папки.

        Raises:
            ExtractionFileWriteError: ошибка ФС или несериализуемые данные
        """
        try:
            payload = json.dumps(data, ensure_ascii=False, indent=2)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise ExtractionFileWriteError(
                message=f"Запись {file_path} не удалась",
                component="ExtractionFileManager",
                original_error=e
            )

        logger.debug(f"[FileManager] Записан {file_path}")
        return file_path

    def load_json(self, file_path: Path) -> Dict[str, Any]:
        """
        Raises:
            ExtractionFileNotFoundError: файла нет
            ExtractionFileWriteError: файл не читается или не является JSON
        """
        if not file_path.is_file():
            raise ExtractionFileNotFoundError(
                message=f"JSON не найден: {file_path}",
                component="ExtractionFileManager"
            )
        try:
            return json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ExtractionFileWriteError(
                message=f"Чтение {file_path} не удалось",
                component="ExtractionFileManager",
                original_error=e
            )

    def read_image(self, image_path: Path) -> bytes:
        """
        Raises:
            ExtractionFileNotFoundError: изображения нет
        """
        if not image_path.is_file():
            raise ExtractionFileNotFoundError(
                message=f"Изображение не найдено: {image_path}",
                component="ExtractionFileManager"
            )
        return image_path.read_bytes()

    def save_batch_response(self, response: BatchExtractionResponse, output_dir: Path) -> Path:
        """<output_dir>/<session_id>.json"""
        return self.save_json(response.to_dict(), output_dir / f"{response.session_id}.json")

    def save_export(
        self,
        document: ExportDocument,
        output_dir: Path,
        export_date: Optional[date] = None,
    ) -> Path:
        """<output_dir>/checklist-extraction-results-YYYY-MM-DD.json"""
        file_path = output_dir / export_file_name(export_date)
        logger.info(f"[FileManager] Экспорт: {file_path.name}")
        return self.save_json(document.to_dict(), file_path)

    def get_image_files(self, directory_path: Path) -> List[Path]:
        """Изображения папки (по расширению, без учёта регистра), отсортированные по пути."""
        if not directory_path.is_dir():
            return []

        try:
            return sorted(
                path for path in directory_path.iterdir()
                if path.is_file() and path.suffix.lower() in SUPPORTED_IMAGE_FORMATS
            )
        except OSError as e:
            logger.warning(f"[FileManager] Папка {directory_path} не читается: {e}")
            return []
