from typing import Iterator, List

from errors import DataError

DELIMITER = ";"


def iter_records(file_path: str, delimiter: str = DELIMITER) -> Iterator[List[str]]:
    """Yield the fields of every data line of the file, header excluded.

    Lines whose first field is empty or whitespace-only are skipped.
    """
    with open(file_path, 'r', encoding='utf-8') as file:
        try:
            next(file, None)  # заголовок
            for line in file:
                fields = line.rstrip('\r\n').split(delimiter)
                if fields[0].strip():
                    yield fields
        except UnicodeDecodeError as e:
            raise DataError(f"Файл {file_path} не в кодировке UTF-8: {e}") from e


def read_addresses(file_path: str, delimiter: str = DELIMITER) -> List[str]:
    return [fields[0] for fields in iter_records(file_path, delimiter)]


def count_records(file_path: str, delimiter: str = DELIMITER) -> int:
    return sum(1 for _ in iter_records(file_path, delimiter))
