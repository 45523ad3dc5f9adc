# windowseat/constants/airports.py
"""
Static airport table and demo flights used when no flight data API is
configured.
"""

AIRPORTS = {
    # North America
    'JFK': {'name': 'John F. Kennedy International', 'city': 'New York', 'latitude': 40.6413, 'longitude': -73.7781},
    'LAX': {'name': 'Los Angeles International', 'city': 'Los Angeles', 'latitude': 33.9425, 'longitude': -118.4081},
    'SFO': {'name': 'San Francisco International', 'city': 'San Francisco', 'latitude': 37.6213, 'longitude': -122.3790},
    'ORD': {'name': "Chicago O'Hare International", 'city': 'Chicago', 'latitude': 41.9742, 'longitude': -87.9073},
    'ATL': {'name': 'Hartsfield-Jackson Atlanta', 'city': 'Atlanta', 'latitude': 33.6407, 'longitude': -84.4277},
    'DEN': {'name': 'Denver International', 'city': 'Denver', 'latitude': 39.8561, 'longitude': -104.6737},
    'SEA': {'name': 'Seattle-Tacoma International', 'city': 'Seattle', 'latitude': 47.4502, 'longitude': -122.3088},
    'MIA': {'name': 'Miami International', 'city': 'Miami', 'latitude': 25.7959, 'longitude': -80.2870},
    'BOS': {'name': 'Boston Logan International', 'city': 'Boston', 'latitude': 42.3656, 'longitude': -71.0096},
    'HNL': {'name': 'Daniel K. Inouye International', 'city': 'Honolulu', 'latitude': 21.3187, 'longitude': -157.9225},
    'ANC': {'name': 'Ted Stevens Anchorage', 'city': 'Anchorage', 'latitude': 61.1743, 'longitude': -149.9962},
    'YYZ': {'name': 'Toronto Pearson', 'city': 'Toronto', 'latitude': 43.6777, 'longitude': -79.6248},
    'YVR': {'name': 'Vancouver International', 'city': 'Vancouver', 'latitude': 49.1947, 'longitude': -123.1790},
    'MEX': {'name': 'Mexico City International', 'city': 'Mexico City', 'latitude': 19.4363, 'longitude': -99.0721},
    # Europe
    'LHR': {'name': 'London Heathrow', 'city': 'London', 'latitude': 51.4700, 'longitude': -0.4543},
    'LGW': {'name': 'London Gatwick', 'city': 'London', 'latitude': 51.1537, 'longitude': -0.1821},
    'DUB': {'name': 'Dublin Airport', 'city': 'Dublin', 'latitude': 53.4264, 'longitude': -6.2499},
    'KEF': {'name': 'Keflavik International', 'city': 'Reykjavik', 'latitude': 63.9850, 'longitude': -22.6056},
    'CDG': {'name': 'Paris Charles de Gaulle', 'city': 'Paris', 'latitude': 49.0097, 'longitude': 2.5479},
    'AMS': {'name': 'Amsterdam Schiphol', 'city': 'Amsterdam', 'latitude': 52.3105, 'longitude': 4.7683},
    'FRA': {'name': 'Frankfurt Airport', 'city': 'Frankfurt', 'latitude': 50.0379, 'longitude': 8.5622},
    'MUC': {'name': 'Munich Airport', 'city': 'Munich', 'latitude': 48.3537, 'longitude': 11.7750},
    'ZRH': {'name': 'Zurich Airport', 'city': 'Zurich', 'latitude': 47.4647, 'longitude': 8.5492},
    'MAD': {'name': 'Madrid-Barajas', 'city': 'Madrid', 'latitude': 40.4983, 'longitude': -3.5676},
    'FCO': {'name': 'Rome Fiumicino', 'city': 'Rome', 'latitude': 41.8003, 'longitude': 12.2389},
    'CPH': {'name': 'Copenhagen Airport', 'city': 'Copenhagen', 'latitude': 55.6180, 'longitude': 12.6508},
    'OSL': {'name': 'Oslo Gardermoen', 'city': 'Oslo', 'latitude': 60.1939, 'longitude': 11.1004},
    'IST': {'name': 'Istanbul Airport', 'city': 'Istanbul', 'latitude': 41.2753, 'longitude': 28.7519},
    # Asia & Middle East
    'HND': {'name': 'Tokyo Haneda', 'city': 'Tokyo', 'latitude': 35.5494, 'longitude': 139.7798},
    'NRT': {'name': 'Tokyo Narita', 'city': 'Tokyo', 'latitude': 35.7720, 'longitude': 140.3929},
    'HKG': {'name': 'Hong Kong International', 'city': 'Hong Kong', 'latitude': 22.3080, 'longitude': 113.9185},
    'ICN': {'name': 'Seoul Incheon', 'city': 'Seoul', 'latitude': 37.4602, 'longitude': 126.4407},
    'SIN': {'name': 'Singapore Changi', 'city': 'Singapore', 'latitude': 1.3644, 'longitude': 103.9915},
    'DEL': {'name': 'Indira Gandhi International', 'city': 'Delhi', 'latitude': 28.5562, 'longitude': 77.1000},
    'DXB': {'name': 'Dubai International', 'city': 'Dubai', 'latitude': 25.2532, 'longitude': 55.3657},
    'DOH': {'name': 'Hamad International', 'city': 'Doha', 'latitude': 25.2609, 'longitude': 51.6138},
    # Africa, Oceania, South America
    'JNB': {'name': 'O.R. Tambo International', 'city': 'Johannesburg', 'latitude': -26.1392, 'longitude': 28.2460},
    'CAI': {'name': 'Cairo International', 'city': 'Cairo', 'latitude': 30.1219, 'longitude': 31.4056},
    'SYD': {'name': 'Sydney Kingsford Smith', 'city': 'Sydney', 'latitude': -33.9399, 'longitude': 151.1753},
    'AKL': {'name': 'Auckland Airport', 'city': 'Auckland', 'latitude': -37.0082, 'longitude': 174.7850},
    'GRU': {'name': 'São Paulo-Guarulhos', 'city': 'São Paulo', 'latitude': -23.4356, 'longitude': -46.4731},
    'EZE': {'name': 'Buenos Aires Ezeiza', 'city': 'Buenos Aires', 'latitude': -34.8222, 'longitude': -58.5358},
}

# flight number -> (origin code, destination code, airline name)
DEMO_FLIGHTS = {
    'BA115': ('LHR', 'JFK', 'British Airways'),
    'BA117': ('LHR', 'JFK', 'British Airways'),
    'BA178': ('JFK', 'LHR', 'British Airways'),
    'EK002': ('LHR', 'DXB', 'Emirates'),
    'JL001': ('SFO', 'HND', 'Japan Airlines'),
    'QF12': ('LAX', 'SYD', 'Qantas'),
    'FI614': ('KEF', 'JFK', 'Icelandair'),
}

DEFAULT_DEMO_ROUTE = ('LHR', 'JFK')
