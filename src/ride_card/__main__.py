from ride_card.cli import main

main()
