# Density ramps, each ordered light -> dark (sparse -> dense visual weight)

MINIMAL_ASCII = tuple(" .:;+*#@")

STANDARD_ASCII = tuple(" .,:;!ilI|/\\rcvxzunoeahkbdpqwmAUJCLQOZX0#MW&8%B@")

# Block elements: space, light/medium/dark shade, full block
BLOCKS = (" ", "░", "▒", "▓", "█")

DOTS_LINES = tuple(" .·∙•-–—―─|¦│║┃/\\╱╲╳+×✕✗✘")

# Legacy dark -> light ramp, kept for callers that relied on it with invert_density
LEGACY = tuple("@#S%?*+;:,. ")

RAMPS = {
    "minimal": MINIMAL_ASCII,
    "standard": STANDARD_ASCII,
    "blocks": BLOCKS,
    "dots-lines": DOTS_LINES,
    "legacy": LEGACY,
}
