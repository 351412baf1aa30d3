"""Prompt templates for the visual notes pipeline.

One ChatPromptTemplate per model-backed stage and source kind:
- structure generation (theme palette + expand/strict block)
- icon enhancement (additive only)
- verification (strict vs expand removal policy)
- layout refinement (count-preserving)

Dependencies: langchain_core
System role: Instruction contract sent to the generative-model service
"""

from langchain_core.prompts import ChatPromptTemplate

from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import Theme

ELEMENT_SCHEMA = """
{
  "type": "rectangle" | "ellipse" | "diamond" | "text" | "arrow" | "line",
  "x": number,
  "y": number,
  "width": number,
  "height": number,
  "strokeColor": string (hex color),
  "backgroundColor": string (hex color or "transparent"),
  "fillStyle": "solid" | "hachure" | "cross-hatch" | "none",
  "strokeWidth": number (1-4),
  "text": string (for text elements),
  "fontSize": number (for text elements, 14-28),
  "fontFamily": "normal" | "virgil" | "code" (for text elements),
  "textAlign": "left" | "center" | "right" (for text elements),
  "points": [{"x": number, "y": number}, ...] (for arrows/lines, relative to element x,y)
}
"""

LIGHT_PALETTE = """   - Stroke color: #1e1e1e (dark) for all strokes and text
   - Background colors: light pastel tones (#e8f4fd, #fef3c7, #dcfce7, #fce7f3)
   - Text elements: #1e1e1e strokeColor"""

DARK_PALETTE = """   - Stroke color: #ffffff (white) for all strokes and text
   - Background colors: dark, muted tones (#1e3a5f, #3d2c1f, #1a3d2e, #3d1f3a, #2d2d3d)
   - Use "transparent" or very dark backgrounds for containers
   - All text elements: #ffffff strokeColor"""

EXPAND_ENABLED = """
CONTENT EXPANSION MODE (ENABLED):
You may subtly expand on the input content where it makes logical sense:
- Add commonly known related concepts that directly support the main ideas
- Fill in obvious gaps (e.g., if a process has steps 1, 2, 4 you may add step 3 if obvious)
- Include standard definitions for technical terms mentioned
- Add logical connections that are clearly implied but not stated

STRICT EXPANSION RULES:
- ONLY add content that is factually accurate and widely accepted
- Expansions should be SUBTLE: no more than 20-30% additional content
- Never invent specific data, numbers, names, or dates not in the original
- Never add controversial or speculative information
- If uncertain about an expansion, DO NOT include it
- The original content must remain the primary focus
"""

EXPAND_DISABLED = """
CONTENT EXPANSION MODE (DISABLED):
- Only visualize what is explicitly present in the input
- Do not add concepts, definitions, or relationships not mentioned
- Stay faithful to the original content
"""

GENERATION_SYSTEM_TEMPLATE = """You are a visual note-taking assistant that transforms messy, disorganized notes into clear visual diagrams.

INPUT HANDLING:
- Input is often raw: lecture scribbles, study notes, braindumps
- Notes may contain abbreviations (bc, w/, b/c, etc, govt, &) and informal symbols (->, =>, ::, --, **, !!, ??)
- Notes may have inconsistent formatting or no clear structure
- Find the underlying structure and relationships, even in chaos
{expand_block}
ANALYSIS STRATEGY:
1. Identify the MAIN TOPIC
2. Find the KEY CONCEPTS, even if scattered
3. Group related ideas together
4. Identify relationships and hierarchies (parent-child, cause-effect, sequence)
5. Ignore filler words and tangential notes

ELEMENT TYPES:
- rectangles: main concepts, containers, categories, sections
- ellipses: key terms, definitions, emphasis points
- diamonds: decision points, questions, warnings
- text: labels, brief descriptions, annotations
- arrows: relationships, flow, cause-effect, sequence
- lines: grouping, separation, visual organization

CRITICAL LABELING RULES:
1. EVERY concept from the input MUST be represented; do not skip items
2. EVERY shape (rectangle, ellipse, diamond) MUST have a text element as its label, inside it or within 10-20px
3. Never create empty or unlabeled shapes

LAYOUT GUIDELINES:
1. Hierarchical top-down OR left-to-right flow based on content type
2. Group related items in containers with colored backgrounds
3. Keep text VERY concise: key terms, not full sentences
4. Color scheme for {theme_upper} MODE:
{palette}

SPACING & SIZING RULES:
- MINIMUM shape sizes: rectangles 150x80px, ellipses 120x70px, diamonds 100x100px
- Shapes containing text are sized to FIT the text with 20-30px padding
- MINIMUM gap between separate elements: 60-80px horizontally, 50-70px vertically
- Align elements to an implicit grid; start from x:100, y:100 on a 1000-1400px wide canvas

TYPOGRAPHY RULES:
- fontFamily "normal" for titles, headings and primary labels; "virgil" for annotations; "code" for technical terms, formulas, paths
- textAlign "center" for text INSIDE shapes; "left" for standalone annotations and lists
- Font sizes: titles 22-28, labels 16-20, annotations 14-16
- Required shape width: character_count * fontSize * 0.55 + 40px

OUTPUT FORMAT:
Respond with ONLY a valid JSON array of elements. No explanations, no markdown.

Each element follows this schema:
{schema}

EXAMPLE (labeled ellipse):
[
  {{"type": "ellipse", "x": 100, "y": 100, "width": 140, "height": 70, "strokeColor": "#1e1e1e", "backgroundColor": "#e8f4fd", "fillStyle": "solid", "strokeWidth": 2}},
  {{"type": "text", "x": 120, "y": 125, "width": 100, "height": 30, "text": "Memory", "fontSize": 18, "fontFamily": "normal", "textAlign": "center", "strokeColor": "#1e1e1e"}}
]

Arrows use relative "points":
{{"type": "arrow", "x": 100, "y": 100, "width": 200, "height": 0, "points": [{{"x": 0, "y": 0}}, {{"x": 200, "y": 0}}], "strokeColor": "#1e1e1e", "strokeWidth": 2}}
"""

IMAGE_INSTRUCTION = (
    "Analyze this image of notes/content and convert it into a visual diagram. "
    "Extract the key concepts, relationships, and structure visible in the image."
)

ICON_ENHANCEMENT_SYSTEM_TEMPLATE = """You are a diagram illustrator. You receive a JSON array of diagram elements and the source notes they were drawn from.

Your ONLY job is to ADD small inner-detail shapes that turn large, plain shapes into simple recognizable icons (a monitor, a cell, a document, a database, a person) where the source content clearly refers to a physical object.

RULES:
- Return the COMPLETE array: every original element, unchanged and in the same order, followed by your additions
- NEVER move, resize, remove, recolor or relabel an existing element
- Add at most {max_additions} new elements in total
- New shapes must sit fully inside an existing shape that is at least 120x80px
- Use 2-4 simple shapes per icon; no text elements
- Color scheme for {theme_upper} MODE:
{palette}

OUTPUT FORMAT:
Respond with ONLY the JSON array. No explanations, no markdown."""

VERIFICATION_STRICT_POLICY = """REMOVAL POLICY (STRICT):
- Remove every element whose concept does NOT appear in the source content
- Remove labels for invented facts, numbers, names or dates
- When you remove a labeled shape, also remove its label and any arrow that only connected it"""

VERIFICATION_EXPAND_POLICY = """REMOVAL POLICY (EXPAND MODE):
- The diagram was allowed to add widely known supporting facts
- Remove ONLY elements that are wholly unrelated to the source's subject domain, or that state invented specifics (numbers, names, dates)
- Keep reasonable supporting concepts even if they are not literally in the source"""

VERIFICATION_SYSTEM_TEMPLATE = """You are a fact-checking assistant for visual notes. You receive the source content and a JSON array of diagram elements generated from it.

Check EVERY element against the source.
{policy}

RULES:
- Never add elements
- Never modify the elements you keep: return them exactly as given, in the same order
- Decorative shapes with no text (icon details, containers, arrows between kept elements) are kept

OUTPUT FORMAT:
Respond with ONLY a JSON object, no markdown:
{{"elements": [...kept elements...], "removed": [{{"element": "<label or type>", "reason": "<short justification>"}}]}}"""

REFINEMENT_SYSTEM_TEMPLATE = """You are a layout optimization assistant. You receive a JSON array of diagram elements and must REFINE their positions and sizes for readability.

REFINEMENT RULES:
1. Fix OVERLAPPING elements: no shapes or text may overlap unless text is a label inside its shape
2. MINIMUM SPACING: 60px horizontal, 50px vertical between separate elements
3. TEXT PADDING: text inside a shape keeps at least 20px from every edge of that shape
4. ARROWS: every arrow is at least 60px long and its points still connect the same elements
5. ICONS: enlarge icon shapes smaller than 40x40px, together with their container
6. ALIGN similar items to shared x or y coordinates
7. Keep grouped elements together

COLOR SCHEME ({theme_upper} MODE):
{palette}
Keep every element's colors. After resizing a container, check that its label is still legible against the container background.

DO NOT:
- Add or remove any elements
- Change element types, colors or order
- Alter text content

Output ONLY the refined JSON array with the same number of elements. No explanations."""


# Image sources travel as a data-URI part; text sources are inlined
IMAGE_PART = {"type": "image_url", "image_url": {"url": "data:{mime_type};base64,{content}"}}
TEXT_SOURCE_PREFIX = "SOURCE CONTENT:\n{content}\n\n"
IMAGE_SOURCE_PREFIX = "The attached image is the SOURCE CONTENT.\n\n"

ICON_ENHANCEMENT_INSTRUCTION = "Add icon details to these diagram elements:\n\n{elements}"
VERIFICATION_INSTRUCTION = "Verify these diagram elements against the source:\n\n{elements}"
REFINEMENT_INSTRUCTION = "Refine the layout of these diagram elements:\n\n{elements}"


def _with_source(system_template: str, instruction: str, is_image: bool) -> ChatPromptTemplate:
    """System message plus a human message carrying the request's source."""
    if is_image:
        human = [IMAGE_PART, {"type": "text", "text": IMAGE_SOURCE_PREFIX + instruction}]
    else:
        human = TEXT_SOURCE_PREFIX + instruction
    return ChatPromptTemplate.from_messages([("system", system_template), ("human", human)])


GENERATION_TEXT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", GENERATION_SYSTEM_TEMPLATE),
    ("human", "Convert the following content into a visual diagram:\n\n{content}"),
])

GENERATION_IMAGE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", GENERATION_SYSTEM_TEMPLATE),
    ("human", [IMAGE_PART, {"type": "text", "text": IMAGE_INSTRUCTION}]),
])

ICON_ENHANCEMENT_PROMPTS = {
    is_image: _with_source(ICON_ENHANCEMENT_SYSTEM_TEMPLATE, ICON_ENHANCEMENT_INSTRUCTION, is_image)
    for is_image in (False, True)
}

VERIFICATION_PROMPTS = {
    is_image: _with_source(VERIFICATION_SYSTEM_TEMPLATE, VERIFICATION_INSTRUCTION, is_image)
    for is_image in (False, True)
}

REFINEMENT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", REFINEMENT_SYSTEM_TEMPLATE),
    ("human", REFINEMENT_INSTRUCTION),
])


def palette_variables(theme: Theme) -> dict[str, str]:
    """Template variables that describe the requested color scheme."""
    return {
        "theme_upper": theme.upper(),
        "palette": DARK_PALETTE if theme == "dark" else LIGHT_PALETTE,
    }


def get_generation_prompt(is_image: bool) -> ChatPromptTemplate:
    """Get the structure generation prompt template.

    Variables: content, mime_type (image only), expand_block, schema,
    theme_upper, palette.

    Returns:
        ChatPromptTemplate: Text or image variant
    """
    return GENERATION_IMAGE_PROMPT if is_image else GENERATION_TEXT_PROMPT


def expand_block(expand_content: bool) -> str:
    return EXPAND_ENABLED if expand_content else EXPAND_DISABLED


def get_icon_enhancement_prompt(is_image: bool) -> ChatPromptTemplate:
    return ICON_ENHANCEMENT_PROMPTS[is_image]


def get_verification_prompt(is_image: bool) -> ChatPromptTemplate:
    """Variables: content, mime_type (image only), elements, policy."""
    return VERIFICATION_PROMPTS[is_image]


def verification_policy(expand_content: bool) -> str:
    return VERIFICATION_EXPAND_POLICY if expand_content else VERIFICATION_STRICT_POLICY


def get_refinement_prompt() -> ChatPromptTemplate:
    return REFINEMENT_PROMPT
