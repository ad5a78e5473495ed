class SiteDefectsError(Exception):
    """Base class for errors raised by the record store and importers."""


class RecordNotFoundError(SiteDefectsError, KeyError):
    def __init__(self, record_id: str):
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Defect record not found: {self.record_id}"


class ImportFormatError(SiteDefectsError, ValueError):
    pass


class RemoteSyncError(SiteDefectsError):
    pass
