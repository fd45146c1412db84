"""Shared GLSL helpers that node bodies may require by name."""

GLSL_UTILITIES: dict[str, str] = {
    "hash21": """float hash21(vec2 p) {
  return fract(sin(dot(p, vec2(127.1, 311.7))) * 43758.5453123);
}""",
    "rotate2d": """vec2 rotate2d(vec2 p, float angle) {
  float c = cos(angle);
  float s = sin(angle);
  return vec2(c * p.x - s * p.y, s * p.x + c * p.y);
}""",
}
