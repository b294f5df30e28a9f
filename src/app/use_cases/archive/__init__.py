"""Data archival use case"""
from .archive_data import ArchiveData
from .dtos import ArchiveResultDTO

__all__ = [
    "ArchiveData",
    "ArchiveResultDTO",
]
