"""Audio file metadata via mutagen"""

import os
from dataclasses import dataclass, field

from mutagen import File as MutagenFile
from mutagen import MutagenError

from .errors import UnsupportedFormat

# extension -> lossless
SUPPORTED_FORMATS = {
	"wav": True,
	"flac": True,
	"ogg": False,
	"mp3": False,
}

UNKNOWN = "Unknown"


@dataclass
class AudioMeta:
	title: str = UNKNOWN
	album: str = UNKNOWN
	artist: str = UNKNOWN


@dataclass
class AudioFile:
	file_name: str
	format: str
	length: float
	sample_rate: int
	stereo: bool
	lossless: bool
	metadata: AudioMeta = field(default_factory=AudioMeta)

	@staticmethod
	def from_path(path: str) -> "AudioFile":
		fmt = get_format(path)
		try:
			audio = MutagenFile(path, easy=True)
		except MutagenError as e:
			raise UnsupportedFormat(f"Cannot read {path}: {e}") from e
		if audio is None:
			raise UnsupportedFormat(f"Cannot parse file: {path}")

		info = audio.info
		return AudioFile(
			file_name=path,
			format=fmt,
			length=float(getattr(info, "length", 0.0) or 0.0),
			sample_rate=int(getattr(info, "sample_rate", 0) or 0),
			stereo=(getattr(info, "channels", 1) or 1) > 1,
			lossless=SUPPORTED_FORMATS[fmt],
			metadata=AudioMeta(
				title=_first_tag(audio, "title"),
				album=_first_tag(audio, "album"),
				artist=_first_tag(audio, "artist"),
			),
		)

	def quality(self):
		"""e.g. '44100 Hz, Stereo, Lossless FLAC'"""
		return "{} Hz, {}, {} {}".format(
			self.sample_rate,
			"Stereo" if self.stereo else "Mono",
			"Lossless" if self.lossless else "Lossy",
			self.format.upper(),
		)


def get_format(path):
	"""Lower-case extension of a supported audio file, else UnsupportedFormat"""
	ext = os.path.splitext(path)[1].lstrip(".").lower()
	if ext not in SUPPORTED_FORMATS:
		supported = ", ".join(f.upper() for f in SUPPORTED_FORMATS)
		raise UnsupportedFormat(f"Unsupported format '{ext or path}' (supported: {supported})")
	return ext


def _first_tag(audio, key):
	tags = audio.tags
	if not tags:
		return UNKNOWN
	try:
		values = tags.get(key)
	except (KeyError, ValueError):
		return UNKNOWN
	if not values:
		return UNKNOWN
	if isinstance(values, list):
		return str(values[0]) or UNKNOWN
	return str(values) or UNKNOWN
