# errors.py: conditions raised by the loader, controller and record parser


class ScaleMapError(Exception):
    pass


class DataUnavailable(ScaleMapError):
    """A dataset could not be fetched or its payload is not a JSON array."""

    def __init__(self, category, source, reason):
        self.category = category
        self.source = source
        self.reason = reason
        super().__init__(f"{category} data unavailable from {source}: {reason}")


class MissingReferencePoint(ScaleMapError):
    def __init__(self, message="Select a reference point on the map before applying the filter."):
        super().__init__(message)


class MalformedCoordinate(ScaleMapError):
    def __init__(self, lat, lon):
        self.lat = lat
        self.lon = lon
        super().__init__(f"Malformed coordinate: lat={lat!r}, lon={lon!r}")
