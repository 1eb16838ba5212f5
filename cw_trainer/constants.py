"""All magic numbers and configuration constants."""

BOUNDARY = "<BT>"                   # prosign wrapped around practice phrases
ICRT_GROUP_SIZE = 5                 # characters per instant-recognition group
OUTPUT_BITRATE = "160k"             # MP3 output bitrate
SAMPLE_RATE = 44100                 # Hz, rendered PCM sample rate
TONE_HZ = 600                       # CW sidetone pitch
TONE_VOLUME = 0.5                   # peak amplitude (0.0–1.0)
RAMP_MS = 5                         # raised-cosine rise/fall per element
DIT_SECONDS_AT_1WPM = 1.2           # PARIS timing: dit = 1.2 / wpm seconds
TRANSCODE_TIMEOUT_SECONDS = 300     # max seconds for a single ffmpeg run
RENDER_WORKERS = 4                  # concurrent (artifact, speed) render units
TEXT_EXTENSION = ".txt"
INTERMEDIATE_EXTENSION = ".wav"
AUDIO_EXTENSION = ".mp3"
DEFAULT_CONFIG = "configs/cwops_beginner.json"
VERSION = "0.1.0"
