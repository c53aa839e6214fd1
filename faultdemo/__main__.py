from __future__ import annotations

from faultdemo.main import main


if __name__ == "__main__":
    main()
