from __future__ import annotations

import json
from pathlib import Path


def _write_package(root: Path, version: str, files: dict) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(
        json.dumps({"name": "com.demo.crate", "version": version}, indent=2),
        encoding="utf-8",
    )
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)


def main():
    base = Path("demo_packages")

    _write_package(
        base / "com.demo.crate@1.0.0",
        "1.0.0",
        {
            "README.md": b"# Crate\n",
            "CHANGELOG.md": b"## 1.0.0\n",
            "Runtime/Crate.cs": b"class Crate {}\n",
            "Runtime/Legacy.cs": b"class Legacy {}\n",
        },
    )
    _write_package(
        base / "com.demo.crate@1.1.0",
        "1.1.0",
        {
            "README.md": b"# Crate\n",
            "CHANGELOG.md": b"## 1.1.0\n- Lid support\n",
            "Runtime/Crate.cs": b"class Crate {}\n",
            "Runtime/Lid.cs": b"class Lid {}\n",
            "Editor/CrateEditor.cs": b"class CrateEditor {}\n",
        },
    )

    print(f"Created demo packages at: {base.resolve()}")


if __name__ == "__main__":
    main()
