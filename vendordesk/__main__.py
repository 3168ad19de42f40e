from vendordesk.cli_main import main

raise SystemExit(main())
