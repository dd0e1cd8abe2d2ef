from railboard.cli import main

raise SystemExit(main())
