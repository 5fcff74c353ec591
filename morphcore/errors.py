class MorphCoreError(Exception):
    """Root class for all distinguished errors raised by this library.

    Args:
        msg: Error message
    """

    def __init__(self, *, msg: str) -> None:
        super().__init__(msg)


class ResourceNotFoundError(MorphCoreError):
    """A resource (confusion sets, dictionary dump, config file) could not be opened.

    Args:
        resource: Identifier of the resource, usually a filesystem path
        reason: Why the resource could not be opened
    """

    def __init__(self, *, resource: str, reason: str) -> None:
        super().__init__(msg=f"Resource '{resource}' could not be opened: {reason}")
        self.resource = resource
        self.reason = reason


class ResourceFormatError(MorphCoreError):
    """A resource was opened but its content cannot be used.

    Args:
        resource: Identifier of the resource
        line_number: 1-based line of the offending content, if known
        reason: Description of the problem
    """

    def __init__(self, *, resource: str, line_number: int | None, reason: str) -> None:
        location = f"{resource}:{line_number}" if line_number is not None else resource
        super().__init__(msg=f"Malformed resource {location}: {reason}")
        self.resource = resource
        self.line_number = line_number
        self.reason = reason


class DecodeError(MorphCoreError):
    """A raw tag could not be decoded into feature bundles.

    Args:
        raw_tag: The complete tag string that failed
        segment_index: 0-based index of the offending segment, None if the whole tag is at fault
        segment: Text of the offending segment, if any
        reason: Description of the failure
    """

    def __init__(
        self,
        *,
        raw_tag: str,
        segment_index: int | None,
        segment: str | None,
        reason: str,
    ) -> None:
        where = ""
        if segment_index is not None:
            where = f" at segment {segment_index}"
            if segment is not None:
                where += f" ('{segment}')"
        super().__init__(msg=f"Cannot decode tag '{raw_tag}'{where}: {reason}")
        self.raw_tag = raw_tag
        self.segment_index = segment_index
        self.segment = segment
        self.reason = reason


class ConfigurationError(MorphCoreError):
    """Grammar tables or settings are malformed.

    Args:
        msg: Description of the defect
    """

    def __init__(self, *, msg: str) -> None:
        super().__init__(msg=msg)
