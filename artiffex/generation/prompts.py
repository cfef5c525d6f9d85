"""Instruction templates sent to the text model."""

DESCRIBE_IMAGE = (
    "Describe this image in a short, descriptive phrase to be used as a prompt for a new "
    "image generation. Focus on the main subject, its key attributes, the background, and "
    "the overall style. Be concise but comprehensive."
)

PODCAST_SCRIPT = (
    "You are a creative and engaging podcast host. Based on the following scene description, "
    "write a short, one-minute podcast script. Make it descriptive and imaginative. "
    'Scene: "{base_prompt}"'
)

ENHANCE_PROMPT = (
    "You are a world-class creative assistant for a text-to-image AI. Your task is to take a "
    "user's simple prompt and expand it into a rich, descriptive, and highly imaginative "
    "paragraph. Infuse it with surprising details, dramatic lighting, and a strong sense of "
    "atmosphere. Do not add any conversational text, just output the new prompt.\n\n"
    'User\'s prompt: "{base_prompt}"'
)

ANIMATION_PROMPTS = (
    "Based on the following scene and animation instruction, generate a sequence of "
    "{frame_count} distinct prompts to create a smooth animation. Each prompt should describe "
    "a single frame. The first prompt should be very similar to the base scene, and the last "
    "prompt should fully complete the action. The prompts should transition logically between "
    "each other.\n\n"
    'Base Scene: "{base_prompt}"\n'
    'Animation Instruction: "{instruction}"'
)
