#!/usr/bin/env python3
"""
Prompt management for the transcription pipeline.

This module holds the prompt templates used to derive a summary and a topic
outline from a finished transcript.
"""

from ..models import SummaryTask

SUMMARY_PROMPT = """Analyze and summarize the following transcription extensively. Provide a rich, detailed summary in a single paragraph, followed by a small section with personal comments or insights.

It is VERY IMPORTANT to format the output in markdown, strictly adhering to the following structure:


[Your single-paragraph summary goes here]

## Comments

- [First comment or insight]
- [Second comment or insight]
- [Third comment or insight]

Transcription:
{transcription}
"""

TOPICS_PROMPT = """Analyze the following transcription and identify the main overarching topics discussed. Focus on broad, general themes rather than specific details. Aim to provide 3-5 major topics that encompass the entire content. For each topic, provide a concise description and the relevant timestamp range. Format the output in markdown, strictly adhering to the following structure:

# Main Topics

## [Broad Topic 1]
- Timestamp Range: [Start time] - [End time]
- Overview: [Concise description of the broad topic and its significance in the overall discussion]

## [Broad Topic 2]
- Timestamp Range: [Start time] - [End time]
- Overview: [Concise description of the broad topic and its significance in the overall discussion]

(Continue for all identified broad topics, aiming for 3-5 in total)

Remember to focus on overarching themes that capture the essence of the entire transcription, rather than listing many specific subtopics.

Transcription:
{transcription}
"""


class PromptManager:
    """
    Manages prompts for summary and topic generation.
    """

    def __init__(self, summary_template: str = SUMMARY_PROMPT, topics_template: str = TOPICS_PROMPT):
        self.summary_template = summary_template
        self.topics_template = topics_template

    def get_summary_prompt(self, transcription: str) -> str:
        return self.summary_template.replace("{transcription}", transcription)

    def get_topics_prompt(self, transcription: str) -> str:
        return self.topics_template.replace("{transcription}", transcription)

    def get_prompt(self, transcription: str, task: SummaryTask) -> str:
        """Get the prompt for ``task`` filled with ``transcription``."""
        if task is SummaryTask.SUMMARY:
            return self.get_summary_prompt(transcription)
        if task is SummaryTask.TOPICS:
            return self.get_topics_prompt(transcription)
        raise ValueError(f"Unknown summary task: {task}")
