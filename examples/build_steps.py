"""Run build steps in dependency order."""

from toporder import CyclicGraphError, topological_sort

steps = {
    "package": ["compile", "docs"],
    "compile": ["fetch"],
    "docs": ["fetch"],
    "test": ["compile"],
    "fetch": [],
}


def run(step: str) -> None:
    print(f"running {step}")


if __name__ == "__main__":
    try:
        order = topological_sort(steps, steps, action=run)
    except CyclicGraphError as e:
        print(f"cannot build: {e} ({', '.join(e.remaining)})")
    else:
        print(" -> ".join(order))
