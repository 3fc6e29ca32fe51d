"""Metadata repository: module functions over ``SessionLocal`` returning plain dicts."""

from .downloads import count_download_records, list_download_records, record_download
from .packages import (
    create_package_record,
    delete_package_record,
    get_package_record,
    package_exists,
    search_package_records,
    update_package_record,
)
from .stats import load_registry_stats
from .versions import (
    create_version_record,
    delete_version_record,
    get_version_record,
    list_version_records,
    version_exists,
)

__all__ = [
    "count_download_records",
    "create_package_record",
    "create_version_record",
    "delete_package_record",
    "delete_version_record",
    "get_package_record",
    "get_version_record",
    "list_download_records",
    "list_version_records",
    "load_registry_stats",
    "package_exists",
    "record_download",
    "search_package_records",
    "update_package_record",
    "version_exists",
]
