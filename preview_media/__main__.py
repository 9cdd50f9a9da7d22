from preview_media.cli import main

raise SystemExit(main())
