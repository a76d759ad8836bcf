"""Risk classification for proposed tool calls."""

from fsai.tools.models import RiskLevel, ToolKind

# Operations that never destroy or overwrite existing data
LOW_RISK_KINDS = frozenset(
    {
        ToolKind.READ_FILE,
        ToolKind.READ_DIRECTORY,
        ToolKind.GET_TREE,
        ToolKind.NAVIGATE,
        ToolKind.PROCESS_MEDIA,
        ToolKind.CREATE_DIRECTORY,
        ToolKind.COPY,
    }
)


def classify(kind: ToolKind | str | None) -> RiskLevel:
    """Classify a tool kind as low or high risk.

    Total over any input: names that are not a known kind are high risk.

    Args:
        kind: A ToolKind or a raw tool name

    Returns:
        RiskLevel.LOW or RiskLevel.HIGH
    """
    if not isinstance(kind, ToolKind):
        kind = ToolKind.parse(kind) if isinstance(kind, str) else None

    if kind in LOW_RISK_KINDS:
        return RiskLevel.LOW
    return RiskLevel.HIGH
