import enum


class ClientType(str, enum.Enum):
    DIRECT_BRAND = "DIRECT_BRAND"
    AGENCY = "AGENCY"
    CORPORATE = "CORPORATE"


class ProjectType(str, enum.Enum):
    EVENT = "EVENT"
    STILLS = "STILLS"
    MOTION = "MOTION"
    HYBRID = "HYBRID"


class ProjectStatus(str, enum.Enum):
    INQUIRY = "INQUIRY"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    DELIVERED = "DELIVERED"
    INVOICED = "INVOICED"
    CLOSED = "CLOSED"
    ARCHIVED = "ARCHIVED"
