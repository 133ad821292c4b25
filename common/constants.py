"""Project-wide constants shared by the service and the CLI."""

TARGET_MIME_TYPE: str = "application/pdf"
ATTACHMENT_POST_TYPE: str = "attachment"

MISSING_FILE_LABEL: str = "Missing file"

SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB")

CSV_HEADER: tuple[str, ...] = ("Filename", "Direct Link", "Upload Date", "File Size")
CSV_BOM: bytes = b"\xef\xbb\xbf"
EXPORT_FILENAME_LABEL: str = "WordPress PDF listing"

NONCE_ACTION: str = "pdf_auditor_nonce"

SORT_KEYS: tuple[str, ...] = ("filename", "upload_date", "file_size_raw")
