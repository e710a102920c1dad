"""Audio decoding and PCM buffer utilities."""

from .buffer import AudioBuffer
from .channels import extract_channel
from .decoder import (
    Decoder,
    DecoderSession,
    FFmpegDecoder,
    SoundFileDecoder,
    create_decoder,
    decode_file,
    decoder_registry,
)

__all__ = [
    "AudioBuffer",
    "Decoder",
    "DecoderSession",
    "FFmpegDecoder",
    "SoundFileDecoder",
    "create_decoder",
    "decode_file",
    "decoder_registry",
    "extract_channel",
]
