"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.50KB, 3.20MB).
        """
        if size_bytes < 0:
            return "0B"
        if size_bytes < 1024:
            return f"{size_bytes}B"

        size = float(size_bytes)
        for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
            if size < 1024:
                return f"{size:.2f}{unit}"
            size /= 1024
        return f"{size:.2f}EB"

    @staticmethod
    def split_comma_list(values) -> list:
        """
        Flatten repeated comma separated option values:
        ['BLAKE2,blake2b', 'x'] -> ['BLAKE2', 'blake2b', 'x'].
        """
        result = []
        for value in values or []:
            result.extend(part.strip() for part in value.split(",") if part.strip())
        return result
