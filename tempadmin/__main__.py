from tempadmin.cli import main

raise SystemExit(main())
