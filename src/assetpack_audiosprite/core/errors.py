"""Error types raised by the audio sprite transform.

None of these are retried locally. They abort the transform for one
folder and surface to the pipeline, which isolates failures per folder.
"""


class AudioSpriteError(Exception):
    """Base exception for all audio sprite transform errors."""

    pass


class ConfigurationError(AudioSpriteError, ValueError):
    """Invalid option file, unknown encoder, or unresolvable transform hook."""

    pass


class EncoderError(AudioSpriteError):
    """The external encoder failed.

    Covers a missing executable, a non-zero exit, unreadable output,
    or any exception raised by an in-process encoder.

    Attributes:
        returncode: Exit status of the encoder process, if one ran
        stderr: Tail of the encoder's stderr output
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class MalformedManifestError(AudioSpriteError):
    """The encoder returned a manifest without a usable 'resources' list.

    This signals an encoder/version incompatibility rather than a
    transient failure.
    """

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message if details is None else f"{message}\n{details}")
        self.details = details


class TransformCallbackError(AudioSpriteError):
    """The user-supplied manifest transform raised.

    The original exception is available as ``__cause__``.
    """

    pass
