from dockerrun.cli import main

raise SystemExit(main())
