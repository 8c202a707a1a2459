# Sample public rooms for local development (SEED_ROOMS=1)
SAMPLE_ROOMS = [
    {"movieLink": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "roomName": "Friday Night Horror Marathon", "genreTag": "Horror"},
    {"movieLink": "https://www.youtube.com/watch?v=example2", "roomName": "Rom-Com Evening", "genreTag": "Romance"},
    {"movieLink": "https://www.youtube.com/watch?v=example3", "roomName": "Action Movie Night", "genreTag": "Action"},
    {"movieLink": "https://www.youtube.com/watch?v=example4", "roomName": "Comedy Central", "genreTag": "Comedy"},
    {"movieLink": "https://www.youtube.com/watch?v=example5", "roomName": "Thriller Thursday", "genreTag": "Thriller"},
    {"movieLink": "https://www.youtube.com/watch?v=example6", "roomName": "Drama Club", "genreTag": "Drama"},
    {"movieLink": "https://www.youtube.com/watch?v=example7", "roomName": "Weekend Movie Fest", "genreTag": "Action"},
    {"movieLink": "https://www.youtube.com/watch?v=example8", "roomName": "Late Night Cinema", "genreTag": "Horror"},
]
