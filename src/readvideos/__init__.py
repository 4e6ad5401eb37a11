#!/usr/bin/env python3
"""
read-videos: turn a video into a timed transcript with a summary and topics.

Audio is extracted from the video, split into request-sized chunks, sent to a
speech-to-text service one chunk at a time, combined into one continuous
timeline, summarized, and saved alongside a catalog of transcribed videos.
"""

__version__ = "1.0.0"
