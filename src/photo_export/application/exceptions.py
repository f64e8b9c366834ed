class ApplicationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class NotFoundError(ApplicationError):
    def __init__(self, spec: str = ""):
        super().__init__(
            message=f"{spec} Not Found"
        )

class BlobNotFoundError(NotFoundError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(spec=f"Blob with key = {key}")

class BlobReadError(ApplicationError):
    def __init__(self, key: str, reason: str = ""):
        self.key = key
        super().__init__(
            message=f"Cannot read blob {key}: {reason}"
        )

class StorageSessionError(ApplicationError):
    def __init__(self, reason: str = ""):
        super().__init__(
            message=f"Cannot open storage session: {reason}"
        )

class ArchiveFinalizeError(ApplicationError):
    def __init__(self, reason: str = ""):
        super().__init__(
            message=f"Cannot finalize archive: {reason}"
        )

class ExportError(ApplicationError):
    def __init__(self, company_id: str, reason: str = ""):
        self.company_id = company_id
        super().__init__(
            message=f"Photo export for company {company_id} failed: {reason}"
        )

class ProductQueryError(ApplicationError):
    def __init__(self, reason: str = ""):
        super().__init__(
            message=f"Cannot load products: {reason}"
        )
