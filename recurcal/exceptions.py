"""Exception hierarchy for recurcal.

The recurrence engine itself never raises for malformed rules; these types
cover the surfaces around it (configuration files, ICS import and export)
so callers can tell a bad input file apart from a programming error.
"""


class RecurcalError(Exception):
    """Base exception for all recurcal errors.

    The CLI catches this type and reports it as a failed command instead of
    a traceback.
    """


class ConfigError(RecurcalError, ValueError):
    """Configuration file could not be used.

    Raised when:
    - The file parses but its top level is not a mapping
    - The file is neither valid YAML nor valid JSON
    """


class ICSImportError(RecurcalError):
    """An ICS file could not be read or parsed.

    Raised when:
    - The file is missing or unreadable
    - The content is not a VCALENDAR the parser understands
    """


class ICSExportError(RecurcalError):
    """Serializing events to ICS failed.

    Raised when the iCalendar library rejects a value while building the
    VCALENDAR document.
    """
