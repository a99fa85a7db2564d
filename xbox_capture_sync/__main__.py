from xbox_capture_sync.main import main

main()
