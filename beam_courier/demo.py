"""Simple command line demo for the beam courier rules."""

from pathlib import Path

from .levels import LevelLoader, SolutionValidator


def main() -> None:
    package_root = Path(__file__).resolve().parent
    level_loader = LevelLoader(package_root / "levels")
    validator = SolutionValidator(level_loader, package_root / "solutions")

    level_name = "level_intro"
    level = level_loader.load(level_name)
    solution = validator.load_solution(level_name)
    engine, results = validator.replay(level, solution["commands"])

    print("=== Beam Courier Demo ===")
    print(f"Level: {level.metadata['name']} ({level.metadata['difficulty']})")
    for command, result in zip(solution["commands"], results):
        print(f"  {command:<20} {result.value}")
    carrier = engine.carrier
    print(f"Carrier ends at {carrier.position} facing {carrier.facing.name}")
    print(f"Level complete: {engine.is_win()}")


if __name__ == "__main__":
    main()
