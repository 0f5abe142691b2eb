from stream_matcher.cli import main

main()
