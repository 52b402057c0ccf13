"""
Stack output helpers.

Writes resolved stack outputs to a dotenv-style file so local tooling can
reach the deployed endpoint without querying Pulumi.
"""

from pathlib import Path

import pulumi


def format_env(values: dict[str, object]) -> str:
    """
    Render output values as KEY=value lines.

    Args:
        values: Output name to resolved value

    Returns:
        File content with upper-cased keys in sorted order
    """
    lines = [f"{key.upper()}={value}" for key, value in sorted(values.items())]
    return "\n".join(lines) + "\n"


def write_outputs_to_env(
    outputs: dict[str, pulumi.Input[object]],
    filename: str,
) -> pulumi.Output[str]:
    """
    Write stack outputs to an env file once Pulumi resolves them.

    Nothing is written during preview, where the values are still unknown.

    Args:
        outputs: Output name to deferred value
        filename: Destination path, relative to the working directory

    Returns:
        Output resolving to the written path
    """
    def _write(values: dict[str, object]) -> str:
        path = Path(filename)
        path.write_text(format_env(values))
        pulumi.log.info(f"Wrote {len(values)} outputs to {path}")
        return str(path)

    return pulumi.Output.all(**outputs).apply(_write)
