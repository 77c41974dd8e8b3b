from mon.main import main

raise SystemExit(main())
