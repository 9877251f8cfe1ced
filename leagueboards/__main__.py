from leagueboards.cli import main

raise SystemExit(main())
