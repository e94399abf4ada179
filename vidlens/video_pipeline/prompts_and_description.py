"""
Prompt templates for video/image analysis and shooting-script generation,
plus the descriptions of the MCP tools that expose them.
"""

from typing import Optional

DEFAULT_VIDEO_SUMMARY_PROMPT = (
    "Based on these video keyframes, describe the main content, scenes, people and actions "
    "of the video in 100-200 words. Do not analyze the frames one by one."
)

VIDEO_SUMMARY_PROMPT = """Based on these {frame_count} video keyframes, describe the video content in 100-200 words, \
covering the main scenes, people, actions and overall content. Write one coherent paragraph and do not analyze the frames one by one."""

VIDEO_DETAILED_ANALYSIS_PROMPT = """Based on these {frame_count} video keyframes, analyze the video content in detail, including:
1. Main scenes and environment
2. Characters and their actions
3. Props and set dressing
4. Camera angles and composition
5. Color and lighting
6. Overall atmosphere and mood
7. Storyline or theme

Use professional film production terminology, so the description can serve as a detailed reference for writing a shooting script."""

IMAGE_DETAILED_ANALYSIS_PROMPT = """Based on these images, analyze their content in detail, including:
1. Main scenes and environment
2. Characters, expressions and actions
3. Props and set details
4. Composition, angles and visual effects
5. Color palette and lighting
6. Overall atmosphere and emotional tone
7. Storyline or theme

Use professional film production terminology, so the description can serve as a detailed reference for writing a shooting script. \
If the images are related, explain their logical relationship and narrative continuity."""

DEFAULT_IMAGE_BATCH_PROMPT = "Describe the content of this image in detail."

# Genre requirements; the image variants add one line about using the source images
SCRIPT_TYPE_REQUIREMENTS = {
    "commercial": [
        "Script type: commercial",
        "Highlight product features and selling points",
        "Include an engaging opening, a clear product showcase and a strong call to action",
        "Keep the language concise and the pacing tight",
    ],
    "documentary": [
        "Script type: documentary",
        "Focus on authenticity and objectivity",
        "Include background, factual statements and in-depth analysis",
        "Keep the language professional, rigorous and logically clear",
    ],
    "tutorial": [
        "Script type: tutorial",
        "Make the steps clear and easy to follow",
        "Include an introduction, step-by-step instruction and a recap",
        "Keep the language plain and emphasize the key points",
    ],
    "narrative": [
        "Script type: narrative",
        "Focus on storytelling and emotional expression",
        "Follow a complete story arc with setup, development, turn and resolution",
        "Keep the language vivid and evocative",
    ],
}

IMAGE_SCRIPT_TYPE_EXTRAS = {
    "commercial": "Make full use of the visual elements in the images to strengthen the ad",
    "documentary": "Build a truthful storyline from the image content",
    "tutorial": "Use elements from the images as teaching examples",
    "narrative": "Weave the image content into a coherent plot",
}

VIDEO_SCRIPT_FORMAT = """
[Script format]
Write a professional shooting script in the following format:

## Video title
[An engaging title based on the content]

## Script overview
[Briefly describe the theme and goal of the video]

## Shot list

### Shot 1: [shot description]
- **Duration**: [estimated duration]
- **Shot size**: [close-up / medium / wide, etc.]
- **Camera position**: [angle and placement]
- **Content**: [what is filmed]
- **Dialogue / narration**: [if any]
- **Sound / music**: [suggested sound]

### Shot 2: [shot description]
[Continue in the same format...]

## Production notes
- [Key shooting techniques]
- [Post-production suggestions]
- [Things to watch out for]

## Expected result
[Describe the expected final video and audience reaction]

Make sure the script is professional and practical enough to guide an actual shoot."""

IMAGE_SCRIPT_FORMAT = """
[Script format]
Write a professional shooting script in the following format:

## Video title
[An engaging title based on the image content]

## Script overview
[Briefly describe the theme and goal of the video, and how the existing images are used]

## Shot list

### Shot 1: [shot description]
- **Duration**: [estimated duration]
- **Shot size**: [close-up / medium / wide, etc.]
- **Camera position**: [angle and placement]
- **Content**: [what is filmed, may reference elements in the images]
- **Reference image**: [if applicable, which image and which elements]
- **Dialogue / narration**: [if any]
- **Sound / music**: [suggested sound]

### Shot 2: [shot description]
[Continue in the same format...]

## Using the image material
- [How to reference and reuse the existing images during the shoot]
- [Which elements can be used directly or should be reshot]
- [How to stay consistent with the style of the images]

## Production notes
- [Key shooting techniques]
- [Post-production suggestions]
- [Things to watch out for]
- [How to combine the footage with the image material]

## Expected result
[Describe the expected final video and audience reaction]

Make sure the script is professional and practical enough to guide an actual shoot, and makes full use of the existing image material."""


def _requirements(
    script_type: str,
    target_audience: str,
    style: str,
    target_duration: Optional[float],
    custom_prompt: Optional[str],
    image_count: Optional[int] = None,
) -> str:
    lines = list(
        SCRIPT_TYPE_REQUIREMENTS.get(
            script_type,
            [
                f"Script type: {script_type}",
                "Fit the script to the characteristics of the "
                + ("image" if image_count is not None else "video")
                + " content",
            ],
        )
    )
    if image_count is not None and script_type in IMAGE_SCRIPT_TYPE_EXTRAS:
        lines.append(IMAGE_SCRIPT_TYPE_EXTRAS[script_type])

    lines.append(f"Target audience: {target_audience}")
    lines.append(f"Shooting style: {style}")
    if image_count is not None:
        lines.append(f"Number of images: {image_count}")
    if target_duration:
        lines.append(f"Target duration: about {target_duration:g} seconds")
    if custom_prompt:
        lines.append(f"Special requirements: {custom_prompt}")
    return "\n".join(f"- {line}" for line in lines)


def build_video_script_prompt(
    video_analysis: str,
    script_type: str,
    target_audience: str,
    style: str,
    target_duration: Optional[float] = None,
    custom_prompt: Optional[str] = None,
) -> str:
    """
    Prompt for writing a shooting script from a video analysis.
    """
    requirements = _requirements(script_type, target_audience, style, target_duration, custom_prompt)
    return (
        "Based on the following video content analysis, write a professional shooting script:\n\n"
        f"[Video content analysis]\n{video_analysis}\n\n"
        f"[Script requirements]\n{requirements}\n"
        f"{VIDEO_SCRIPT_FORMAT}"
    )


def build_image_script_prompt(
    image_analysis: str,
    image_count: int,
    script_type: str,
    target_audience: str,
    style: str,
    target_duration: Optional[float] = None,
    custom_prompt: Optional[str] = None,
) -> str:
    """
    Prompt for writing a shooting script from merged per-image analyses.
    """
    requirements = _requirements(
        script_type, target_audience, style, target_duration, custom_prompt, image_count=image_count
    )
    return (
        f"Based on the following content analysis of {image_count} images, write a professional shooting script:\n\n"
        f"[Image content analysis]\n{image_analysis}\n\n"
        f"[Script requirements]\n{requirements}\n"
        f"{IMAGE_SCRIPT_FORMAT}"
    )


# Tool descriptions
TOOL_EXTRACT_VIDEO_FRAMES = (
    "Extract still frames from a local video file with FFmpeg. Supports uniform, keyframe and "
    "scene_change strategies (keyframe and scene_change currently sample uniformly). "
    "Returns the saved frame paths and their timestamps."
)

TOOL_ANALYZE_VIDEO_CONTENT = (
    "Summarize a local video: extracts up to 4 keyframes and sends them to the Hunyuan vision model "
    "in a single request. Temporary frames are deleted afterwards unless cleanup is false."
)

TOOL_ANALYZE_IMAGE_BATCH = (
    "Analyze several local images with the Hunyuan vision model, one request per image with a pause "
    "between requests. A failing image is reported in place and does not stop the batch."
)

TOOL_GET_VIDEO_INFO = (
    "Read basic metadata of a local video file: duration, resolution, frame rate, estimated frame "
    "count and container format."
)

TOOL_GENERATE_VIDEO_SCRIPT = (
    "Write a professional shooting script from a local video. Analyzes keyframes with the vision "
    "model, then writes the script with the text model. script_type is one of commercial, "
    "documentary, tutorial, narrative or custom."
)

TOOL_GENERATE_IMAGE_SCRIPT = (
    "Write a professional shooting script from a set of local images. Each image is analyzed "
    "separately, the analyses are merged and the text model writes the script."
)
